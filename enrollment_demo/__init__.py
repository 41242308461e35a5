"""Student enrollment demo: embedded versus referenced documents in MongoDB"""

__version__ = "0.0.1"
