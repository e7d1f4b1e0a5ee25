from .cascade import (
    Probe,
    run_cascade,
    run_cascade_with_source,
    run_paired_cascade,
    text_probes,
    html_probes,
    text_html_pairs,
    image_probes,
)
from .description import reveal_description_tab, reveal_by_scroll

__all__ = [
    "Probe",
    "html_probes",
    "image_probes",
    "reveal_by_scroll",
    "reveal_description_tab",
    "run_cascade",
    "run_cascade_with_source",
    "run_paired_cascade",
    "text_html_pairs",
    "text_probes",
]
