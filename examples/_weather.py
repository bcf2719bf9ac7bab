"""Tiny module used by the runnable examples."""

from __future__ import annotations

import urllib.request


def fetch_temperature(city: str) -> float:
    """Fetch the current temperature of *city* from the weather service."""
    with urllib.request.urlopen(f"https://weather.invalid/{city}") as response:  # noqa: S310
        return float(response.read())


def report(city: str) -> str:
    """Describe the current temperature of *city*."""
    return f"{city}: {fetch_temperature(city):.1f} degrees"
