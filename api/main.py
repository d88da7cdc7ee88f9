# api/main.py
"""
FastAPI backend for SpinCraft - exposes the spinfield engine as REST API.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, model_validator
from typing import Dict, List, Optional, Any
import sys
import logging
from pathlib import Path
import io
import csv

# Add project root to path to import spinfield
sys.path.insert(0, str(Path(__file__).parent.parent))

from spinfield.driver import FrameDriver
from spinfield.lattice import build_lattice
from spinfield.params import SimulationParams, from_multipliers
from spinfield.pointer import PerspectiveCamera, project_pointer
from spinfield.post import compute_metrics
from spinfield.kernel.errors import SpinfieldError

logger = logging.getLogger("spinfield")

MAX_GRID_SIZE = 64
MAX_FRAMES = 2000


app = FastAPI(
    title="SpinCraft API",
    description="Pointer-driven LLG spin lattice engine",
    version="1.0.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class ParamsData(BaseModel):
    """Simulation parameters (exchange and time step as slider multipliers)."""
    gamma: float = Field(5e5, ge=1e5, le=1e6, description="Gyromagnetic coefficient")
    alpha: float = Field(0.3, ge=0.01, le=1.5, description="Gilbert damping")
    exchange_multiplier: float = Field(1.0, ge=0.1, le=10.0, description="× base exchange 1.5e-10")
    external_field_strength: float = Field(2e5, ge=1e4, le=1e6, description="Pointer field strength")
    time_step_multiplier: float = Field(1.0, ge=0.1, le=10.0, description="× base time step 5e-10")
    # Lower bound is enforced by the lattice builder (400, not 422)
    grid_size: int = Field(20, le=MAX_GRID_SIZE, description="Sites per side")
    is_field_inverted: bool = Field(False, description="Repulsive instead of attractive field")


class PointerData(BaseModel):
    """Pointer target: either a point on the plane or NDC through the default camera."""
    x: Optional[float] = None
    y: Optional[float] = None
    ndc_x: Optional[float] = Field(None, ge=-1.0, le=1.0)
    ndc_y: Optional[float] = Field(None, ge=-1.0, le=1.0)

    @model_validator(mode="after")
    def check_pairs(self):
        for a, b in (("x", "y"), ("ndc_x", "ndc_y")):
            if (getattr(self, a) is None) != (getattr(self, b) is None):
                raise ValueError(f"{a} and {b} must be given together")
        if self.x is None and self.ndc_x is None:
            raise ValueError("pointer needs x/y or ndc_x/ndc_y")
        return self


class SimulateRequest(BaseModel):
    params: ParamsData = Field(default_factory=ParamsData)
    pointer: Optional[PointerData] = None
    n_frames: int = Field(60, ge=1, le=MAX_FRAMES)
    delta: float = Field(1 / 60, ge=0.0, le=1.0, description="Wall-clock seconds per frame")
    include_transforms: bool = False


class LatticeRequest(BaseModel):
    grid_size: int = Field(20, le=MAX_GRID_SIZE)
    spacing: float = Field(0.5, gt=0.0, le=10.0)


class SiteData(BaseModel):
    """Site geometry and state."""
    index: int
    row: int
    col: int
    x: float
    y: float
    z: float
    neighbors: List[int]
    mx: Optional[float] = None
    my: Optional[float] = None
    mz: Optional[float] = None


class LatticeResult(BaseModel):
    grid_size: int
    spacing: float
    n_sites: int
    n_bonds: int
    sites: List[SiteData]


class SimulationResult(BaseModel):
    """Final state after n_frames."""
    success: bool
    error: Optional[str] = None
    frames: int = 0
    dt: float = 0.0
    pointer: Optional[List[float]] = None
    sites: Optional[List[SiteData]] = None
    transforms: Optional[List[List[List[float]]]] = None
    metrics: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None


# =============================================================================
# Helpers
# =============================================================================

def to_simulation_params(data: ParamsData) -> SimulationParams:
    return from_multipliers(
        exchange_multiplier=data.exchange_multiplier,
        time_step_multiplier=data.time_step_multiplier,
        gamma=data.gamma,
        alpha=data.alpha,
        external_field_strength=data.external_field_strength,
        grid_size=data.grid_size,
        is_field_inverted=data.is_field_inverted,
    )


def resolve_pointer(pointer: Optional[PointerData]):
    """Plane point from explicit coordinates (preferred) or NDC; None keeps the default."""
    if pointer is None:
        return None
    if pointer.x is not None:
        return (pointer.x, pointer.y, 0.0)
    return project_pointer(pointer.ndc_x, pointer.ndc_y, PerspectiveCamera())


def run_simulation(request: SimulateRequest) -> SimulationResult:
    """Build a driver, run the frames, summarize. Raises SpinfieldError on bad config."""
    params = to_simulation_params(request.params)
    driver = FrameDriver(params)
    target = resolve_pointer(request.pointer)

    result = driver.run([request.delta] * request.n_frames, [target] * request.n_frames)

    sites = [
        SiteData(
            index=s.index, row=s.row, col=s.col,
            x=s.position[0], y=s.position[1], z=s.position[2],
            neighbors=list(s.neighbors),
            mx=float(d[0]), my=float(d[1]), mz=float(d[2]),
        )
        for s, d in zip(driver.lattice, result.directions)
    ]

    return SimulationResult(
        success=True,
        frames=result.frame,
        dt=result.dt,
        pointer=[float(c) for c in result.pointer],
        sites=sites,
        transforms=result.transforms.tolist() if request.include_transforms else None,
        metrics=compute_metrics(result.directions, driver.lattice),
        params=params.to_dict(),
    )


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "SpinCraft API"}


@app.post("/api/lattice", response_model=LatticeResult)
async def lattice_geometry(request: LatticeRequest):
    """Site positions and neighbour lists for a grid size."""
    try:
        lattice = build_lattice(request.grid_size, request.spacing)
    except SpinfieldError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LatticeResult(
        grid_size=lattice.grid_size,
        spacing=lattice.spacing,
        n_sites=len(lattice),
        n_bonds=len(lattice.bonds()),
        sites=[
            SiteData(
                index=s.index, row=s.row, col=s.col,
                x=s.position[0], y=s.position[1], z=s.position[2],
                neighbors=list(s.neighbors),
            )
            for s in lattice
        ],
    )


@app.post("/api/simulate", response_model=SimulationResult)
async def simulate(request: SimulateRequest):
    """Run n_frames of the LLG lattice with a fixed pointer target."""
    try:
        return run_simulation(request)
    except SpinfieldError as e:
        logger.error("Simulation rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/export/csv")
async def export_csv(request: SimulateRequest):
    """Export the final spin configuration as CSV."""
    try:
        result = run_simulation(request)
    except SpinfieldError as e:
        raise HTTPException(status_code=400, detail=str(e))

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['index', 'row', 'col', 'x', 'y', 'z', 'mx', 'my', 'mz'])
    for s in result.sites:
        writer.writerow([
            s.index, s.row, s.col,
            round(s.x, 4), round(s.y, 4), round(s.z, 4),
            round(s.mx, 6), round(s.my, 6), round(s.mz, 6),
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=spin_state.csv"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
