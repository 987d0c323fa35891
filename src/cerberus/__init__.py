"""Cerberus: non-custodial swap proxy for the Jupiter aggregator."""

__version__ = "0.1.0"
