"""
SimFaaS: Fission protocol emulation on a simulated FaaS platform.
"""

__version__ = "0.1.0"
