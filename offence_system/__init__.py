"""
FRSC Traffic Offence System
Backend Application Package

Record keeping for traffic offences issued by the Federal Road Safety
Commission (Lafia command): offence records, vehicle-owner lookups,
simulated fine payment and dashboard statistics.
"""

__version__ = "1.0.0"
__author__ = "FRSC Lafia"
