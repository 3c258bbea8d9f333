"""
Simulators - stand-in rover firmware for development without hardware
"""
