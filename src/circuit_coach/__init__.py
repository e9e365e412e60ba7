"""circuit-coach: guided 8-week calisthenics circuits with a work/rest interval timer."""

__version__ = "0.1.0"
