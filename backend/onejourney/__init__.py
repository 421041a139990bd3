"""OneJourney smart mobility backend: route ranking, wallet and weekly challenges."""

__version__ = "0.1.0"
