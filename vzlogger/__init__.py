"""Smart-meter logger core: OBIS ids, readings, buffers, channels, push and configuration."""

__version__ = "0.1.0"