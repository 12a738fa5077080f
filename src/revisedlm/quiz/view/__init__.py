from .quick_fire import QuickFireApp

__all__ = ["QuickFireApp"]
