"""
Reports Module - Blood Bank API

Motor de reportes operacionales del banco de sangre: inventario por
grupo sanguíneo, estado de cumplimiento de solicitudes, solicitudes
vencidas, actividad de donantes, resumen por entidad de salud e
histograma de donaciones por día o mes.

Este módulo NO crea nuevas tablas ni modifica datos: cada reporte es una
transformación pura sobre la foto actual de bolsas, solicitudes y
donantes que entrega el módulo de donaciones.

Architecture Pattern: Service Layer
- routers/ -> Endpoints FastAPI (un GET por reporte)
- dependencies.py -> Query params validados y fuente de datos
- services/ -> Lógica de agregación de cada reporte
- schemas/ -> Modelos Pydantic para filtros y respuestas
- utils/ -> Normalización y parseo de fechas
"""

__version__ = "1.0.0"
__description__ = "Operational reports for the blood bank"
