from engine.series.normalize import NormalizedSeries, clean, normalize, require

__all__ = ["NormalizedSeries", "clean", "normalize", "require"]
