"""REST API for the pyfide player catalog."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from pyfide.api.schemas import ErrorBody, ErrorEnvelope, SuccessEnvelope
from pyfide.config import Settings, iter_disciplines
from pyfide.errors import CatalogError, StoreFailure
from pyfide.query.filters import SearchParams, parse_flag
from pyfide.service import PlayerCatalog
from pyfide.store import RecordStore, SqlitePlayerStore


logger = logging.getLogger("uvicorn.error")


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorEnvelope(error=body).render())


def create_app(
    store: Optional[RecordStore] = None,
    catalog: Optional[PlayerCatalog] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if catalog is None:
        if store is None:
            store = SqlitePlayerStore(settings.db_path)
        catalog = PlayerCatalog(store, facet_workers=settings.facet_workers)

    app = FastAPI(title="pyfide player catalog")
    app.state.catalog = catalog
    app.state.settings = settings

    @app.exception_handler(CatalogError)
    async def catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        expose = settings.expose_errors or not isinstance(exc, StoreFailure)
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return _error_response(exc.status_code, ErrorBody(**exc.to_payload(expose_details=expose)))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
        details = {"error": str(exc)} if settings.expose_errors else None
        return _error_response(
            500,
            ErrorBody(code="INTERNAL_ERROR", message="Internal Server Error", details=details),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # -- statistics -------------------------------------------------------

    @app.get("/players/stats")
    def player_stats(include_inactive: Optional[str] = Query(None, alias="includeInactive")):
        include = parse_flag(include_inactive)
        report = catalog.player_stats(include_inactive=include)
        return SuccessEnvelope(data=report, filters={"includeInactive": include}).render()

    @app.get("/players/stats/age-groups")
    def age_group_stats(
        group_code: Optional[str] = Query(None, alias="groupCode"),
        rating_type: Optional[str] = Query(None, alias="ratingType"),
        gender: Optional[str] = None,
        include_inactive: Optional[str] = Query(None, alias="includeInactive"),
    ):
        stats = catalog.age_group_stats(
            group_code,
            rating_type=rating_type,
            gender=gender,
            include_inactive=parse_flag(include_inactive),
        )
        summary = {
            "totalAgeGroups": len(stats) if isinstance(stats, list) else 1,
            "ratingType": rating_type or "standard",
            "gender": gender or "all",
        }
        return SuccessEnvelope(data=stats, summary=summary).render()

    # -- searches ---------------------------------------------------------

    @app.get("/players/search/by-fide-id")
    def search_by_fide_id(player_id: Optional[str] = Query(None, alias="id")):
        return SuccessEnvelope(data=catalog.search_by_fide_id(player_id)).render()

    @app.get("/players/search/by-name")
    def search_by_name(
        name: Optional[str] = None,
        page: Optional[str] = None,
        size: Optional[str] = None,
    ):
        result = catalog.search_by_name(name, page, size)
        return SuccessEnvelope(data=result.data, pagination=result.pagination).render()

    @app.get("/players/search/advanced")
    def advanced_search(
        federation: Optional[str] = None,
        gender: Optional[str] = None,
        sex: Optional[str] = None,
        title: Optional[str] = None,
        min_rating: Optional[str] = Query(None, alias="minRating"),
        max_rating: Optional[str] = Query(None, alias="maxRating"),
        has_title: Optional[str] = Query(None, alias="hasTitle"),
        page: Optional[str] = None,
        size: Optional[str] = None,
    ):
        params = SearchParams(
            federation=federation,
            gender=gender if gender is not None else sex,
            title=title,
            min_rating=min_rating,
            max_rating=max_rating,
            has_title=has_title,
        )
        result = catalog.advanced_search(params, page, size)
        return SuccessEnvelope(data=result.data, pagination=result.pagination).render()

    @app.get("/players/federation/{federation}")
    def players_by_federation(
        federation: str,
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        gender: Optional[str] = None,
        page: Optional[str] = None,
        size: Optional[str] = None,
    ):
        result = catalog.players_by_federation(federation, sort_by, gender, page, size)
        return SuccessEnvelope(
            data=result.data,
            pagination=result.pagination,
            federation=result.federation,
        ).render()

    # -- titles -----------------------------------------------------------

    @app.get("/players/titles/all")
    def title_summary():
        return SuccessEnvelope(data=catalog.title_summary()).render()

    @app.get("/players/titles/by-type")
    def players_by_title_type(title_type: Optional[str] = Query(None, alias="type")):
        return SuccessEnvelope(data=catalog.players_by_title_type(title_type)).render()

    # Registered after the fixed /players/... routes so they take precedence.
    @app.get("/players/{player_id}")
    def get_player(player_id: str):
        return SuccessEnvelope(data=catalog.get_player(player_id)).render()

    # -- rankings ---------------------------------------------------------

    def _ranking_route(discipline: str):
        def ranking(
            gender: Optional[str] = None,
            federation: Optional[str] = None,
            page: Optional[str] = None,
            size: Optional[str] = None,
            include_inactive: Optional[str] = Query(None, alias="includeInactive"),
        ):
            include = parse_flag(include_inactive)
            result = catalog.rankings(discipline, gender, federation, page, size, include_inactive=include)
            return SuccessEnvelope(
                data=result.data,
                pagination=result.pagination,
                filters={"includeInactive": include},
            ).render()

        ranking.__name__ = f"rankings_{discipline}"
        return ranking

    for discipline in iter_disciplines():
        app.get(f"/rankings/{discipline.key}")(_ranking_route(discipline.key))

    @app.get("/rankings/age-group/{group_code}")
    def rankings_by_age_group(
        group_code: str,
        gender: Optional[str] = None,
        rating_type: Optional[str] = Query(None, alias="ratingType"),
        page: Optional[str] = None,
        size: Optional[str] = None,
    ):
        result = catalog.rankings_by_age_group(group_code, gender, rating_type, page, size)
        return SuccessEnvelope(
            data=result.data,
            pagination=result.pagination,
            groupCode=result.group_code,
        ).render()

    return app


__all__ = ["create_app"]
