from engine.stress.classify import StressTransition, TransitionForecast, classify, predict_transition

__all__ = ["StressTransition", "TransitionForecast", "classify", "predict_transition"]
