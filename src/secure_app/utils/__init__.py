"""Utilities: logging, enum helpers"""
