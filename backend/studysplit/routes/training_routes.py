"""
Training Routes Module
======================
REST API endpoints for building and resuming trainings.

Endpoints:
- POST /api/process                    - Segment a URL into a new training
- GET  /api/training/<id>?source=...   - Load (or rebuild) a shared training
- PUT  /api/training/<id>/progress     - Save viewing progress
"""

import traceback

from flask import Blueprint, request, jsonify, current_app

from ..models import TrainingProgress, generate_share_id
from ..services import ProcessingError, build_response_payload, training_response
from ..storage import SourceMismatchError
from ..logging_config import get_app_logger, log_request_event

logger = get_app_logger("routes.training", log_to_file=False)

# Create blueprint
training_bp = Blueprint('training', __name__)


def _base_url() -> str:
    return request.host_url.rstrip('/')


@training_bp.route('/process', methods=['POST'])
def process_url():
    """
    Segment an article or YouTube URL into a new training.

    Request JSON:
        {"url": "https://..."}

    Response JSON:
        Training payload plus shareId, shareApiUrl and progress
    """
    data = request.get_json(silent=True) or {}
    url = str(data.get('url') or '').strip()

    if not url:
        return jsonify({'error': 'A url field is required.'}), 400

    log_request_event("process", url)

    try:
        training = current_app.content_service.process_url(url)
    except ProcessingError as e:
        logger.error(f"Processing failed: {e}", extra={'source_url': url})
        return jsonify({'error': 'Unable to process the provided URL.', 'details': str(e)}), 500
    except Exception as e:
        logger.error(f"Unexpected processing error: {e}", extra={'source_url': url})
        logger.error(traceback.format_exc())
        return jsonify({'error': 'Unable to process the provided URL.', 'details': str(e)}), 500

    share_id = generate_share_id()
    payload = training.to_dict()
    progress = TrainingProgress.fresh(training.total_segments)
    current_app.training_store.save(share_id, url, payload, progress)

    log_request_event("process_complete", url, share_id, {'segments': training.total_segments})
    return jsonify(training_response(training, share_id, _base_url(), progress)), 200


@training_bp.route('/training/<share_id>', methods=['GET'])
def load_training(share_id):
    """
    Load a shared training.

    A stored record for the same source is returned with its progress;
    otherwise the source is processed again with fresh progress.

    Query params:
        source: URL the training was built from (required)
    """
    source = str(request.args.get('source') or '').strip()

    if not source:
        return jsonify({'error': 'A source query parameter is required.'}), 400

    log_request_event("load", source, share_id)

    try:
        record = current_app.training_store.load(share_id)
        if record is not None and record.source_url == source:
            return jsonify(build_response_payload(
                record.payload, share_id, source, _base_url(), record.progress
            )), 200

        training = current_app.content_service.process_url(source)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Unable to load training {share_id}: {e}", extra={'source_url': source})
        logger.error(traceback.format_exc())
        return jsonify({'error': 'Unable to load training.'}), 500

    return jsonify(training_response(training, share_id, _base_url())), 200


@training_bp.route('/training/<share_id>/progress', methods=['PUT', 'POST'])
def update_progress(share_id):
    """
    Save viewing progress for a stored training.

    Request JSON:
        {
            "source": "https://...",      # Required: must match the stored source
            "completed": [true, false],   # Optional
            "activeIndex": 1              # Optional
        }
    """
    data = request.get_json(silent=True) or {}
    source = str(data.get('source') or '').strip()

    if not source:
        return jsonify({'error': 'A source field is required.'}), 400

    try:
        record = current_app.training_store.update_progress(
            share_id,
            source,
            completed=data.get('completed'),
            active_index=data.get('activeIndex'),
        )
    except SourceMismatchError as e:
        return jsonify({'error': str(e)}), 409
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    if record is None:
        return jsonify({'error': 'Training not found'}), 404

    log_request_event("progress", source, share_id, {'activeIndex': record.progress.active_index})
    return jsonify({'shareId': share_id, 'progress': record.progress.to_dict()}), 200
