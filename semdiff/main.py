"""
Semantic Diff & Merge API
FastAPI application entry point.
"""

import logging
import time

from fastapi import FastAPI, UploadFile, File, HTTPException, Form
from fastapi.middleware.cors import CORSMiddleware

from semdiff.config import settings
from semdiff.errors import InvalidRuleError, PresetNotFoundError
from semdiff.models import (
    ChangeDetail,
    ClassifyRequest,
    DiffRequest,
    DiffResponse,
    Location,
    MergeRequest,
    MergeResponse,
    MergeResult,
    PresetOut,
)
from semdiff.services import (
    MERGE_PRESETS,
    analyze_diff,
    blocks_to_text,
    classify,
    get_preset,
    merge_documents,
    parse_document,
    rule_to_dict,
    rules_from_dicts,
)
from semdiff.utils import configure_logging, strip_html

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("semdiff.api")

app = FastAPI(
    title=settings.APP_NAME,
    description="Word-level diffing, change classification and rule-based merge resolution",
    version=settings.APP_VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/health")
async def health():
    """Health check for deployment."""
    return {"status": "ok"}


@app.get("/api/presets", response_model=list[PresetOut])
async def list_presets():
    """List the shipped merge presets and their rules."""
    return [
        PresetOut(
            id=preset.id,
            name=preset.name,
            description=preset.description,
            rules=[rule_to_dict(rule) for rule in preset.rules],
        )
        for preset in MERGE_PRESETS
    ]


@app.post("/api/diff", response_model=DiffResponse)
async def diff_texts(request: DiffRequest):
    """Word-level diff of two texts plus whole-document measurements."""
    old_text, new_text = _prepare(request.old_text, request.new_text, request.strip_html)
    analysis = analyze_diff(old_text, new_text)

    return DiffResponse(
        operations=[op.to_dict() for op in analysis.operations],
        stats=vars(analysis.stats),
        change_percent=analysis.change_percent,
        similarity=analysis.similarity,
        change_scale=analysis.change_scale.value,
        suggested_mode=analysis.suggested_mode,
        fallback=analysis.fallback,
    )


@app.post("/api/classify", response_model=ChangeDetail)
async def classify_span(request: ClassifyRequest):
    """Classify a single original/modified span pair."""
    change = classify(request.original, request.modified, Location(request.location, request.section))
    return ChangeDetail(**change.to_dict())


@app.post("/api/merge", response_model=MergeResponse)
async def merge_texts(request: MergeRequest):
    """
    Classify every change between two texts and resolve it with merge rules.

    Explicit rules take precedence over preset_id; with neither, the
    configured default preset is used.
    """
    start_time = time.time()
    rules = _resolve_rules(request.preset_id, request.rules)
    old_text, new_text = _prepare(request.old_text, request.new_text, request.strip_html)

    result = merge_documents(old_text, new_text, rules, sections=request.sections)

    return _merge_response(result, {
        "preset_id": None if request.rules is not None else (request.preset_id or settings.DEFAULT_PRESET),
        "rule_count": len(rules),
        "processing_time_ms": int((time.time() - start_time) * 1000),
    })


@app.post("/api/compare", response_model=MergeResponse)
async def compare_uploads(
    file_v1: UploadFile = File(..., description="Original document (.docx)"),
    file_v2: UploadFile = File(..., description="Modified document (.docx)"),
    preset_id: str = Form(default=settings.DEFAULT_PRESET, description="Merge preset id"),
):
    """Compare two Word documents and resolve the changes with a preset."""
    start_time = time.time()

    if not file_v1.filename.endswith('.docx'):
        raise HTTPException(400, f"File 1 must be .docx, got: {file_v1.filename}")
    if not file_v2.filename.endswith('.docx'):
        raise HTTPException(400, f"File 2 must be .docx, got: {file_v2.filename}")

    rules = _resolve_rules(preset_id, None)

    try:
        blocks_v1 = parse_document(await file_v1.read())
        blocks_v2 = parse_document(await file_v2.read())
    except Exception as e:
        logger.warning("Could not parse uploaded documents: %s", e)
        raise HTTPException(400, f"Could not read document: {e}") from e

    result = merge_documents(blocks_to_text(blocks_v1), blocks_to_text(blocks_v2), rules)

    return _merge_response(result, {
        "file_v1": file_v1.filename,
        "file_v2": file_v2.filename,
        "blocks_v1": len(blocks_v1),
        "blocks_v2": len(blocks_v2),
        "preset_id": preset_id,
        "processing_time_ms": int((time.time() - start_time) * 1000),
    })


def _prepare(old_text: str, new_text: str, markup: bool) -> tuple[str, str]:
    if markup:
        return strip_html(old_text), strip_html(new_text)
    return old_text, new_text


def _resolve_rules(preset_id, rules_data):
    if rules_data is not None:
        try:
            return rules_from_dicts(rules_data)
        except InvalidRuleError as e:
            raise HTTPException(422, str(e)) from e
    try:
        return list(get_preset(preset_id or settings.DEFAULT_PRESET).rules)
    except PresetNotFoundError as e:
        raise HTTPException(404, str(e)) from e


def _merge_response(result: MergeResult, metadata: dict) -> MergeResponse:
    return MergeResponse(
        success=True,
        changes=[ChangeDetail(**change.to_dict()) for change in result.changes],
        stats=vars(result.stats),
        summary=result.summary,
        metadata=metadata,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
