"""
Calc Engine — declarative calculator tools evaluated from configuration.

Architecture: Config + inputs → Scope → Formulas (sympy) + Registered functions → Result map
Philosophy:  Tools are data. Only the registered functions are code.
"""

__version__ = "1.0.0"
