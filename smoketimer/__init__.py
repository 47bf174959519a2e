"""SmokeTimer: a tray-resident countdown and overtime timer with daily counters."""

__version__ = "0.1.0"
