"""Web UI routes for PhraseClip."""

import json
import logging
import queue
import subprocess
import threading
import uuid
from pathlib import Path

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    render_template,
    request,
    send_file,
)
from werkzeug.utils import secure_filename

from phraseclip.engine import process
from phraseclip.manifest import ClipConfig, Manifest, check_end_offset

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


@bp.route("/")
def index():
    return render_template("index.html", phrase_sets=sorted(current_app.config["PHRASE_SETS"]))


@bp.route("/api/upload", methods=["POST"])
def upload():
    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400

    f = request.files["file"]
    if not f.filename:
        return jsonify({"error": "Empty filename"}), 400

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id
    input_dir = job_dir / "input"
    output_dir = job_dir / "clips"
    input_dir.mkdir(parents=True, exist_ok=True)
    output_dir.mkdir(parents=True, exist_ok=True)

    name = secure_filename(f.filename) or "input.mp4"
    if not Path(name).suffix:
        name += ".mp4"
    input_path = input_dir / name
    f.save(input_path)

    _jobs[job_id] = {
        "dir": job_dir,
        "input_dir": input_dir,
        "output_dir": output_dir,
        "input_path": input_path,
        "filename": f.filename,
        "status": "uploaded",
    }

    return jsonify({"job_id": job_id, "filename": f.filename})


@bp.route("/api/jobs/<job_id>/process", methods=["POST"])
def start_process(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] not in ("uploaded", "done", "error"):
        return jsonify({"error": f"Job is already {job['status']}"}), 409

    config = request.get_json(silent=True) or {}

    phrase_set = config.get("phrase_set", current_app.config["DEFAULT_PHRASE_SET"])
    if phrase_set not in current_app.config["PHRASE_SETS"]:
        return jsonify({"error": f"Unknown phrase set: {phrase_set}"}), 400

    end_offset = config.get("end_offset")
    if end_offset is not None:
        try:
            end_offset = float(end_offset)
        except (TypeError, ValueError):
            return jsonify({"error": "end_offset must be a number"}), 400
        try:
            check_end_offset(end_offset)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

    # Only the uploaded file lives in input_dir, so the run covers just that video
    suffix = job["input_path"].suffix.lower()
    manifest = Manifest(
        input_dir=job["input_dir"],
        output_dir=job["output_dir"],
        clips=ClipConfig(
            end_offset=end_offset,
            phrase_set=phrase_set,
            extensions=[suffix],
        ),
    )

    progress_queue: queue.Queue = queue.Queue()
    job["progress_queue"] = progress_queue
    job["status"] = "processing"
    job["error"] = None

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(manifest, on_progress=on_progress)
            files = result.files
            job["result"] = {
                "clips": [p.name for f in files for p in f.clips],
                "matches": sum(len(f.matches) for f in files),
                "entries": sum(f.entries for f in files),
            }
            job["clip_paths"] = [p for f in files for p in f.clips]
            job["status"] = "done"
        except subprocess.CalledProcessError as e:
            job["status"] = "error"
            stderr = e.stderr if isinstance(e.stderr, str) else (e.stderr or b"").decode(errors="replace")
            job["error"] = f"ffmpeg failed: {stderr[-500:]}" if stderr else str(e)
        except Exception as e:
            logger.exception("Job %s failed", job_id)
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"status": "started"})


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job.get("progress_queue")

    if q is None:
        return jsonify({"error": "No processing in progress"}), 409

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/clips/<int:index>")
def download_clip(job_id: str, index: int):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    if job["status"] != "done":
        return jsonify({"error": "Job not complete"}), 409

    clip_paths = job.get("clip_paths", [])
    if index >= len(clip_paths):
        return jsonify({"error": "Clip not found"}), 404

    return send_file(clip_paths[index], as_attachment=True)


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {"status": job["status"], "filename": job.get("filename")}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)
