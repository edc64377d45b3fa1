import math
import os
import shutil
import tempfile
import zipfile
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from openpyxl.utils.exceptions import InvalidFileException

from .config import get_config
from .preprocessing import read_file
from .unsupervised import ExploratoryClustering
from .visualize import figure_to_base64, plot_cluster_means, plot_embedding, plot_silhouette_curve

app = FastAPI(title="autocluster")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],        # allow all origins (dev only)
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _clean(value):
    """NaN is not valid JSON"""
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def stage_to_dict(pipeline, name, include_plots=True):
    stage = pipeline.results[name]
    selection = stage['selection']

    payload = {
        "k": int(selection['optimal_k']),
        "silhouette": _clean(float(selection['silhouette'])),
        "adequate": selection['adequate'],
        "reason": selection['reason'],
        "scores": [
            {"k": int(r['k']), "silhouette": _clean(float(r['silhouette'])), "inertia": float(r['inertia'])}
            for r in selection['scores']
        ],
        "cluster_sizes": {str(k): v for k, v in stage['sizes'].items()},
        "labels": [int(label) for label in stage['labels']],
        "profiles": [
            {key: _clean(val.item() if hasattr(val, "item") else val) for key, val in row.items()}
            for row in pipeline.generate_cluster_profiles(name).to_dict(orient="records")
        ],
    }

    if include_plots:
        plots = {
            "silhouette": figure_to_base64(plot_silhouette_curve(selection)),
            "cluster_means": figure_to_base64(plot_cluster_means(pipeline.numeric_df, stage['labels'])),
        }
        if 'embedding' in stage:
            plots["embedding"] = figure_to_base64(
                plot_embedding(stage['embedding'], stage['labels'], silhouette=selection['silhouette'])
            )
        payload["plots"] = plots

    return payload


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/cluster/")
async def cluster_api(
    file: UploadFile = File(...),
    columns: str = Form(""),
    k_min: Optional[int] = Form(None),
    k_max: Optional[int] = Form(None),
    seed: Optional[int] = Form(None),
    force_reduction: bool = Form(False),
    include_plots: bool = Form(True),
):
    # -------------------------------
    # Save uploaded file
    # -------------------------------
    suffix = os.path.splitext(file.filename or "")[1] or ".csv"
    with tempfile.TemporaryDirectory() as tmp_dir:
        file_path = os.path.join(tmp_dir, f"upload{suffix}")
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        try:
            df = read_file(file_path)
        except (ValueError, OSError, zipfile.BadZipFile, InvalidFileException) as e:
            raise HTTPException(status_code=422, detail=f"Could not read uploaded file: {e}")

    # -------------------------------
    # Run clustering workflow
    # -------------------------------
    cfg = get_config()
    k_min = cfg.K_MIN if k_min is None else k_min
    k_max = cfg.K_MAX if k_max is None else k_max
    selected = [c.strip() for c in columns.split(",") if c.strip()] or None
    pipeline = ExploratoryClustering(
        df,
        columns=selected,
        k_range=range(k_min, k_max + 1),
        random_state=cfg.SEED if seed is None else seed,
        force_reduction=force_reduction,
        verbose=False,
    )
    try:
        pipeline.run_pipeline()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "message": "Clustering executed successfully",
        "rows": int(pipeline.numeric_df.shape[0]),
        "features": pipeline.numeric_df.columns.tolist(),
        "final_stage": pipeline.final_stage,
        "stages": {
            name: stage_to_dict(pipeline, name, include_plots=include_plots)
            for name in pipeline.results
        },
    }
