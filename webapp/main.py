from __future__ import annotations

import dataclasses
import logging
import time
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from quickjava import QuickJavaEngine
from webapp.examples import example_names, get_example
from webapp.interpreter import SimulationConfig, interpret
from webapp.report import RunStatus

logger = logging.getLogger("quickjava.web")

app = FastAPI(title="QuickJava Online Compiler", version="2.0.0")

STATIC_DIR = Path(__file__).parent / "static"
if STATIC_DIR.exists():
	app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

BASE_CONFIG = SimulationConfig.from_env()


class CheckRequest(BaseModel):
	source: str


class RunRequest(BaseModel):
	source: str
	# Optional per-run overrides of the server defaults
	max_iterations: int | None = Field(default=None, ge=1)
	print_only_bodies: bool | None = None


def _config_for(req: RunRequest) -> SimulationConfig:
	overrides: Dict[str, Any] = {}
	if req.max_iterations is not None:
		overrides["max_iterations"] = req.max_iterations
	if req.print_only_bodies is not None:
		overrides["print_only_bodies"] = req.print_only_bodies
	return dataclasses.replace(BASE_CONFIG, **overrides)


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
	index_path = STATIC_DIR / "index.html"
	if index_path.exists():
		return HTMLResponse(index_path.read_text(encoding="utf-8"))
	return HTMLResponse(
		"<h2>QuickJava Online Compiler API</h2><p>POST <code>/api/run</code> with JSON: <code>{\"source\": \"...\"}</code></p>"
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.post("/api/check")
def check_source(req: CheckRequest) -> Dict[str, Any]:
	engine = QuickJavaEngine(entry_class=BASE_CONFIG.entry_class)
	art = engine.compile(req.source)
	structure = art.structure
	return {
		"duration_ms": art.duration_ms,
		"has_errors": art.has_errors,
		"diagnostic_count": len(art.diagnostics),
		"diagnostics": [d.to_dict() for d in art.diagnostics],
		"structure": {
			"className": structure.class_name,
			"hasMain": structure.has_main,
			"lines": structure.line_count,
			"prints": structure.print_count,
			"openBraces": structure.open_braces,
			"closeBraces": structure.close_braces,
		},
	}


@app.post("/api/run")
def run_source(req: RunRequest) -> Any:
	start = time.perf_counter()
	result = interpret(req.source, _config_for(req))
	payload = result.to_dict()
	payload["duration_ms"] = (time.perf_counter() - start) * 1000
	if result.status == RunStatus.BUSY:
		return JSONResponse(status_code=409, content=payload)
	logger.info("run finished: status=%s output_lines=%d", result.status.value, len(result.output))
	return payload


@app.get("/api/examples")
def list_examples() -> Dict[str, List[str]]:
	return {"examples": example_names()}


@app.get("/api/examples/{name}")
def read_example(name: str) -> Dict[str, str]:
	try:
		source = get_example(name)
	except KeyError:
		raise HTTPException(status_code=404, detail=f"Unknown example: {name}")
	return {"name": name.lower(), "source": source}
