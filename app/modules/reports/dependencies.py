"""
Dependencias para el módulo de Reportes

Convierte los query params de cada endpoint en los filtros validados
(rango de tiempo, sangre, paginación, agrupación) y provee la fuente de
datos de solo lectura. Un parámetro inválido responde 400 antes de
generar cualquier reporte.
"""

from typing import Optional

from fastapi import HTTPException, Query, status
from pydantic import ValidationError

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.modules.donations.repository import DonationsRepository
from app.modules.reports.schemas import BloodFilter, GroupBy, PaginationParams, TimeRange


def _bad_request(exc: ValidationError) -> HTTPException:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part)
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="; ".join(messages)
    )


def get_time_range(
    from_: Optional[str] = Query(None, alias="from", description="Start date (ISO-8601), inclusive"),
    to: Optional[str] = Query(None, description="End date (ISO-8601), inclusive")
) -> TimeRange:
    """Dependency para el rango de tiempo opcional [from, to]"""
    try:
        return TimeRange(from_=from_, to=to)
    except ValidationError as e:
        raise _bad_request(e)


def get_blood_filter(
    type: Optional[str] = Query(None, description="Blood type: A, B, AB, O"),
    rh: Optional[str] = Query(None, description="Rh factor: + or - (URL-encode '+' as %2B)")
) -> BloodFilter:
    """Dependency para el filtro opcional por tipo de sangre y Rh"""
    try:
        return BloodFilter(type=type, rh=rh)
    except ValidationError as e:
        raise _bad_request(e)


def get_pagination(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, description="Number of records per page"),
    offset: int = Query(0, description="Number of records to skip")
) -> PaginationParams:
    """Dependency para los parámetros de paginación"""
    try:
        return PaginationParams(limit=limit, offset=offset)
    except ValidationError as e:
        raise _bad_request(e)


def get_group_by(
    group_by: Optional[str] = Query(None, alias="groupBy", description="Bucket donations by: none, day, month")
) -> GroupBy:
    """Dependency para la agrupación del histograma de donaciones"""
    if group_by is None or not group_by.strip():
        return GroupBy.NONE
    try:
        return GroupBy(group_by.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"groupBy must be one of: {', '.join(g.value for g in GroupBy)}"
        )


def get_data_source(db: db_dependency) -> DonationsRepository:
    """Dependency para la fuente de datos de los reportes"""
    return DonationsRepository(db)
