"""NewsDesk - news site backend fed by a Facebook page."""

__version__ = "0.1.0"
