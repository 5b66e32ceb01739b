from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ...analytics import (
    ChartGeometry,
    DateRange,
    InvalidRangeError,
    MoodRecord,
    SearchEngine,
    StatsEngine,
    records_to_csv,
)
from ...core.config import Settings
from ...metrics import PIE_TAPS, USER_API_COUNTER
from ...schemas.records import MoodRecordListResponse, MoodRecordModel, MoodRecordUpsert
from ...schemas.search import SearchResponse
from ...schemas.settings import GranularityModel, PaletteModel
from ...schemas.stats import (
    ArcModel,
    MoodCountModel,
    PieResponse,
    PieTapRequest,
    PieTapResponse,
    StatsResponse,
    TrendBucketModel,
)
from ...services.navigation import UrlNavigator
from ...services.storage import StorageService

router = APIRouter(prefix="/api/v1", tags=["core"])
logger = logging.getLogger(__name__)


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def _stats_engine(
    storage: StorageService,
    settings: Settings,
    navigator: UrlNavigator | None = None,
) -> StatsEngine:
    palette = await storage.get_palette()
    return StatsEngine(palette, week_start=settings.week_start_day, navigator=navigator)


# -- records -------------------------------------------------------------
@router.get("/records", response_model=MoodRecordListResponse)
async def list_records(
    storage: StorageService = Depends(get_storage_service),
) -> MoodRecordListResponse:
    records = await storage.get_all()
    items = [MoodRecordModel.model_validate(r, from_attributes=True) for r in records.values()]
    USER_API_COUNTER.labels(endpoint="records_get").inc()
    return MoodRecordListResponse(items=items)


@router.get("/records/{date_key}", response_model=MoodRecordModel)
async def read_record(
    date_key: str,
    storage: StorageService = Depends(get_storage_service),
) -> MoodRecordModel:
    record = await storage.get_record(date_key)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="record not found")
    return MoodRecordModel.model_validate(record, from_attributes=True)


@router.put("/records/{date_key}", response_model=MoodRecordModel)
async def save_record(
    date_key: str,
    payload: MoodRecordUpsert,
    storage: StorageService = Depends(get_storage_service),
) -> MoodRecordModel:
    try:
        record = await storage.save_record(
            date_key,
            mood=payload.mood.strip(),
            note=payload.note,
            timestamp=payload.timestamp,
        )
    except InvalidRangeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    USER_API_COUNTER.labels(endpoint="records_put").inc()
    return MoodRecordModel.model_validate(record, from_attributes=True)


@router.delete("/records/{date_key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    date_key: str,
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    if not await storage.delete_record(date_key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="record not found")
    USER_API_COUNTER.labels(endpoint="records_delete").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- settings ------------------------------------------------------------
@router.get("/settings/palette", response_model=PaletteModel)
async def read_palette(storage: StorageService = Depends(get_storage_service)) -> PaletteModel:
    return PaletteModel(palette=await storage.get_palette())


@router.put("/settings/palette", response_model=PaletteModel)
async def update_palette(
    payload: PaletteModel,
    storage: StorageService = Depends(get_storage_service),
) -> PaletteModel:
    palette = await storage.set_palette(payload.palette)
    if not palette:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="empty palette")
    return PaletteModel(palette=palette)


@router.get("/settings/granularity", response_model=GranularityModel)
async def read_granularity(
    storage: StorageService = Depends(get_storage_service),
) -> GranularityModel:
    return GranularityModel(granularity=await storage.get_default_granularity())


@router.put("/settings/granularity", response_model=GranularityModel)
async def update_granularity(
    payload: GranularityModel,
    storage: StorageService = Depends(get_storage_service),
) -> GranularityModel:
    return GranularityModel(granularity=await storage.set_default_granularity(payload.granularity))


# -- stats ---------------------------------------------------------------
@router.get("/stats", response_model=StatsResponse)
async def read_stats(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    granularity: str | None = Query(default=None),
    storage: StorageService = Depends(get_storage_service),
    settings: Settings = Depends(get_app_settings),
) -> StatsResponse:
    engine = await _stats_engine(storage, settings)
    chosen = granularity or (await storage.get_default_granularity()).value
    state = engine.compute_stats(await storage.get_all(), start, end, chosen)
    USER_API_COUNTER.labels(endpoint="stats_get").inc()
    return StatsResponse(
        start=start,
        end=end,
        granularity=chosen,
        data_locked=state.data_locked,
        records_in_range=state.records_in_range,
        range_mood_counts=[
            MoodCountModel.model_validate(item, from_attributes=True)
            for item in state.range_mood_counts
        ],
        trend_buckets=[
            TrendBucketModel.model_validate(bucket, from_attributes=True)
            for bucket in state.trend_buckets
        ],
        pie_map=state.pie_map,
    )


@router.get("/stats/pie", response_model=PieResponse)
async def read_pie(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    granularity: str | None = Query(default=None),
    storage: StorageService = Depends(get_storage_service),
    settings: Settings = Depends(get_app_settings),
) -> PieResponse:
    engine = await _stats_engine(storage, settings)
    chosen = granularity or (await storage.get_default_granularity()).value
    state = engine.compute_stats(await storage.get_all(), start, end, chosen)
    arcs = engine.draw_pie_chart(state.pie_map)
    USER_API_COUNTER.labels(endpoint="stats_pie").inc()
    return PieResponse(
        pie_map=state.pie_map,
        arcs=[ArcModel.model_validate(arc, from_attributes=True) for arc in arcs],
    )


@router.post("/stats/tap", response_model=PieTapResponse)
async def tap_pie(
    payload: PieTapRequest,
    storage: StorageService = Depends(get_storage_service),
    settings: Settings = Depends(get_app_settings),
) -> PieTapResponse:
    navigator = UrlNavigator(search_path=f"{router.prefix}/search")
    engine = await _stats_engine(storage, settings, navigator)
    state = engine.compute_stats(
        await storage.get_all(), payload.start, payload.end, payload.granularity
    )
    arcs = engine.draw_pie_chart(state.pie_map)
    geometry = ChartGeometry.for_canvas(
        payload.width or settings.chart_width,
        payload.height or settings.chart_height,
        active_ratio=settings.pie_active_ratio,
    )
    handoff = engine.on_pie_tap((payload.x, payload.y), arcs, geometry)
    PIE_TAPS.labels(result="resolved" if handoff else "miss").inc()
    USER_API_COUNTER.labels(endpoint="stats_tap").inc()
    if handoff is None:
        return PieTapResponse(mood=None)
    return PieTapResponse(mood=handoff.mood, search_url=navigator.last_url)


# -- search --------------------------------------------------------------
async def _run_search(
    storage: StorageService,
    *,
    start: str | None,
    end: str | None,
    moods: list[str],
    only_with_mood: bool,
    only_empty_mood: bool,
    keyword: str,
) -> tuple[SearchEngine, list[MoodRecord]]:
    engine = SearchEngine(await storage.get_all())
    engine.initialize(moods[0] if len(moods) == 1 else None)
    filters: dict[str, object] = {
        "keyword": keyword,
        "only_with_mood": only_with_mood,
        "only_empty_mood": only_empty_mood,
    }
    if len(moods) > 1:
        filters["selected_moods"] = moods
    engine.set_filters(**filters)
    if start or end:
        try:
            engine.set_filters(date_range=DateRange.parse(start, end))
        except InvalidRangeError as exc:
            logger.info("search range rejected: %s", exc)
            return engine, []
    return engine, engine.search()


@router.get("/search", response_model=SearchResponse)
async def search_records(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    mood: list[str] = Query(default=[]),
    only_with_mood: bool = Query(default=False),
    only_empty_mood: bool = Query(default=False),
    keyword: str = Query(default=""),
    storage: StorageService = Depends(get_storage_service),
) -> SearchResponse:
    engine, results = await _run_search(
        storage,
        start=start,
        end=end,
        moods=mood,
        only_with_mood=only_with_mood,
        only_empty_mood=only_empty_mood,
        keyword=keyword,
    )
    USER_API_COUNTER.labels(endpoint="search_get").inc()
    return SearchResponse(
        presence=engine.state.presence.value,
        selected_moods=sorted(engine.state.selected_moods),
        count=len(results),
        items=[MoodRecordModel.model_validate(r, from_attributes=True) for r in results],
    )


@router.get("/search/export")
async def export_search(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    mood: list[str] = Query(default=[]),
    only_with_mood: bool = Query(default=False),
    only_empty_mood: bool = Query(default=False),
    keyword: str = Query(default=""),
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    _, results = await _run_search(
        storage,
        start=start,
        end=end,
        moods=mood,
        only_with_mood=only_with_mood,
        only_empty_mood=only_empty_mood,
        keyword=keyword,
    )
    content = records_to_csv(results)
    USER_API_COUNTER.labels(endpoint="search_export").inc()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=moodjournal-search.csv"},
    )
