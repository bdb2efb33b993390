"""Flask application factory for the PhraseClip web UI."""

import tempfile
from pathlib import Path

from flask import Flask, jsonify

from phraseclip.analyzers.phrases import DEFAULT_PHRASE_SET, PHRASE_SETS


def create_app(
    work_dir: Path | None = None,
    phrase_sets: dict[str, tuple[str, ...]] | None = None,
) -> Flask:
    """Build the web app.

    Uploads and clips for each job live under *work_dir* (a fresh temp dir
    by default).  *phrase_sets* limits which presets the UI offers; it must
    be a subset of ``PHRASE_SETS`` since the engine resolves names itself.
    """
    phrase_sets = phrase_sets or PHRASE_SETS
    unknown = set(phrase_sets) - set(PHRASE_SETS)
    if unknown:
        raise ValueError(f"Unknown phrase sets: {', '.join(sorted(unknown))}")

    app = Flask(__name__)
    app.config["WORK_DIR"] = work_dir or Path(tempfile.mkdtemp(prefix="phraseclip_"))
    app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024 * 1024  # 10 GB
    app.config["PHRASE_SETS"] = dict(phrase_sets)
    app.config["DEFAULT_PHRASE_SET"] = (
        DEFAULT_PHRASE_SET if DEFAULT_PHRASE_SET in phrase_sets else sorted(phrase_sets)[0]
    )

    from phraseclip.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"error": "File too large"}), 413

    return app
