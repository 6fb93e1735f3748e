"""
Fleet scanning module.

SwingService exposes the serving-layer operations (range analysis, point
evaluation, fleet scan, daily candidate scan) over a BarStore.
"""
from .service import SwingService

__all__ = [
    'SwingService',
]
