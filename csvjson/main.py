import hashlib
from typing import Literal, Optional, Union

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from .convert import convert_bytes
from .models import ConversionOptions, ConversionReport, ConvertResponse, HealthResponse
from .serialize import dumps_ndjson_line

app = FastAPI(
    title="csv-to-json",
    description="Deterministic CSV to JSON conversion for spreadsheet exports",
    version="0.2.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/convert", response_model=None)
async def convert_csv(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(default=None),
    infer_types: bool = Query(default=False),
    array_fields: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    empty_cells: Literal["typed", "array"] = Query(default="typed"),
    ndjson: bool = Query(default=False),
) -> Union[ConvertResponse, PlainTextResponse]:
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    try:
        options = ConversionOptions(
            delimiter=delimiter,
            infer_types=infer_types,
            array_fields=array_fields,
            limit=limit,
            empty_cells=empty_cells,
            ndjson=ndjson,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc

    raw = await file.read()
    result = convert_bytes(raw, options)

    if ndjson:
        body = "".join(dumps_ndjson_line(r, result.headers, options) for r in result.records)
        return PlainTextResponse(body, media_type="application/x-ndjson")

    report = ConversionReport(
        sha256=hashlib.sha256(raw).hexdigest(),
        encoding=result.encoding,
        codec=result.codec,
        lossy=result.lossy,
        rows=len(result.records),
        columns=len(result.headers),
        skipped=result.skipped,
    )
    return ConvertResponse(
        headers=result.headers,
        delimiter=result.delimiter,
        rows=result.records,
        report=report,
    )
