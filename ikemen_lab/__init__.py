"""IKEMEN Lab: content library tooling for the IKEMEN GO fighting game engine."""
