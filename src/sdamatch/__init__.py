"""
Matching de inmuebles SDA para participantes del NDIS.

Calcula la compatibilidad participante-inmueble, la guarda en Supabase
y avisa a los participantes con matches excelentes.
"""

__version__ = "0.1.0"
