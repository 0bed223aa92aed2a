"""PresuMaker - Generador de Presupuestos."""

__version__ = "1.0.0"
