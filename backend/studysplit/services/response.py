"""
Response Assembly Module
========================
Packages a Training for the client: share id, share URL and normalized
progress on top of the training payload.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from ..models import Training, TrainingProgress

# Characters encodeURIComponent leaves alone besides the unreserved set
URI_COMPONENT_SAFE = "!*'()"


def build_share_api_url(base_url: str, share_id: str, source_url: str) -> str:
    """URL that reloads a training: {base}/api/training/{id}?source={url}."""
    source = quote(source_url, safe=URI_COMPONENT_SAFE)
    return f"{base_url.rstrip('/')}/api/training/{share_id}?source={source}"


def build_response_payload(
    payload: Dict[str, Any],
    share_id: str,
    source_url: str,
    base_url: str,
    progress: Optional[TrainingProgress] = None
) -> Dict[str, Any]:
    """
    Attach share metadata and progress to a training payload.

    Args:
        payload: Training.to_dict() output (or a stored copy of it)
        share_id: Identifier the training is stored under
        source_url: URL the training was built from
        base_url: Scheme and host the request came in on
        progress: Stored progress; fresh progress when None

    Returns:
        Payload dict with shareId, shareApiUrl and progress added
    """
    segments = payload.get('segments') if isinstance(payload.get('segments'), list) else []
    progress = (progress or TrainingProgress.fresh(len(segments))).normalize(len(segments))

    response = dict(payload)
    response.update({
        'shareId': share_id,
        'shareApiUrl': build_share_api_url(base_url, share_id, source_url),
        'progress': {
            'completed': progress.completed,
            'activeIndex': progress.active_index,
        },
    })
    return response


def training_response(
    training: Training,
    share_id: str,
    base_url: str,
    progress: Optional[TrainingProgress] = None
) -> Dict[str, Any]:
    """build_response_payload for a freshly built Training."""
    return build_response_payload(training.to_dict(), share_id, training.source_url, base_url, progress)
