"""Decoding of internationalized domain names, IDNA2008 label helpers and table generators."""

__version__ = "2.3.8"