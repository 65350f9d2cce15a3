#!/usr/bin/env python3
"""
server.py - Template rendering service

FastAPI-based server that renders text templates with the parsem engine,
either from a template sent in the request body or from a template stored in
the template directory.

Environment:
    PARSEM_TEMPLATE_DIR  directory of stored templates (default: templates)
"""

import logging
import os
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from parsem import Options, TemplateEngine, TemplateError, __version__
from parsem.config import TemplateLoader

logger = logging.getLogger("parsem.server")

# Initialize FastAPI app
app = FastAPI(title="Template Rendering API", version=__version__)

# Initialize components
template_loader = TemplateLoader(os.environ.get("PARSEM_TEMPLATE_DIR", "templates"))


class RenderRequest(BaseModel):
    template: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    strict: bool = True


class TemplateRenderRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)
    strict: bool = True


class VariablesRequest(BaseModel):
    template: str


class VariablesResponse(BaseModel):
    arguments: List[str]
    defaults: Dict[str, Any]
    conditions: List[str]
    needs_arguments: bool


def _engine(strict: bool) -> TemplateEngine:
    return TemplateEngine(Options(strict=strict), logger)


@app.post("/render")
async def render_template(request: RenderRequest):
    """
    Render a template sent in the request body.

    Returns:
        {"output": rendered text}
    """
    try:
        output = _engine(request.strict).render(request.template, request.arguments)
    except TemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error rendering template")
        raise HTTPException(status_code=500, detail=f"Error rendering template: {str(e)}")
    return {"output": output}


@app.post("/variables", response_model=VariablesResponse)
async def template_variables(request: VariablesRequest):
    """List the variables a template expects, with their defaults."""
    engine = _engine(strict=False)
    try:
        found = engine.list_variables(request.template)
    except TemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return VariablesResponse(
        arguments=found.arguments,
        defaults=found.defaults,
        conditions=found.conditions,
        needs_arguments=engine.needs_arguments(request.template),
    )


@app.get("/templates")
async def list_templates():
    """List stored templates."""
    return {"templates": template_loader.list_templates()}


@app.post("/templates/{template_path:path}")
async def render_stored_template(template_path: str, request: TemplateRenderRequest):
    """
    Render a template stored in the template directory.

    Args:
        template_path: Path relative to the template directory (e.g. "config/app.yaml")
        request: Arguments and strict flag

    Returns:
        {"template": template_path, "output": rendered text}
    """
    try:
        template = template_loader.load(template_path)
        output = _engine(request.strict).render(template, request.arguments)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TemplateError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Unexpected error rendering %s", template_path)
        raise HTTPException(status_code=500, detail=f"Error rendering template: {str(e)}")
    return {"template": template_path, "output": output}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
