import os
import uuid

from flask import Flask, request, jsonify, render_template
from flask_cors import CORS
from werkzeug.utils import secure_filename

from huffman import compress, EmptyInputError

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
UPLOAD_DIR = os.environ.get("HUFFMAN_UPLOAD_DIR", os.path.join(BASE_DIR, "uploads"))
MAX_UPLOAD_MB = int(os.environ.get("HUFFMAN_MAX_UPLOAD_MB", "16"))

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__, template_folder="templates")
app.config["UPLOAD_FOLDER"] = UPLOAD_DIR
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_MB * 1024 * 1024
CORS(app)

# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def save_upload(file):
    """Store the upload under a per-request name and return its path."""
    upload_dir = app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_dir, exist_ok=True)

    filename = secure_filename(file.filename or "") or "upload"
    path = os.path.join(upload_dir, f"{uuid.uuid4().hex}_{filename}")
    file.save(path)
    return path


def remove_upload(path):
    try:
        os.remove(path)
    except OSError as e:
        app.logger.warning("Error deleting file %s: %s", path, e)

# -----------------------------------------------------------
# ROUTES
# -----------------------------------------------------------
@app.route("/")
def home():
    return render_template("index.html")


@app.route("/compress", methods=["POST"])
def compress_route():
    file = request.files.get("file")
    if not file:
        return jsonify({"error": "No file uploaded"}), 400

    input_path = save_upload(file)
    try:
        with open(input_path, "rb") as f:
            data = f.read()

        result = compress(data)

        app.logger.info("Compressed %s: %d → %d bytes (%.2f%%)",
                        file.filename, result.original_size,
                        result.compressed_size, result.compression_percentage)
        return jsonify(result.to_dict())

    except EmptyInputError:
        return jsonify({"error": "File is empty"}), 400

    except Exception:
        app.logger.exception("Error in /compress")
        return jsonify({"error": "Internal Server Error"}), 500

    finally:
        remove_upload(input_path)


@app.errorhandler(413)
def too_large(e):
    return jsonify({"error": "File too large"}), 413

# -----------------------------------------------------------
if __name__ == "__main__":
    app.run(port=int(os.environ.get("PORT", "8000")), debug=True)
