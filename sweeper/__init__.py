"""Cloud Sweeper - mark/notify/clean garbage collection for cloud resources."""

__version__ = "0.4.0"
