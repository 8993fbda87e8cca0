"""
Turn Dispatch Service

A ticketing service that admits requests into three priority classes
(VIP, priority, general) and dispatches them in strict class order,
first-come-first-served within each class, with a durable snapshot.
"""

__version__ = "1.0.0"
