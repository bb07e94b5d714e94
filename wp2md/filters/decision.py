from __future__ import annotations

from wp2md.models.options import FilteringOptions
from wp2md.models.post import RawPostRecord
from wp2md.models.quality import FilterDecision

from .quality import analyze_quality
from .system_pages import classify

ACCEPTED_UNFILTERED = FilterDecision(accept=True)


def decide(post: RawPostRecord, html_body: str, options: FilteringOptions) -> FilterDecision:
    """Decide whether ``post`` should be converted.

    With filtering disabled every post is accepted and no metrics are
    computed.  Otherwise the quality check runs first, then the draft check,
    and only the first matching skip reason is reported.
    """
    if not options.filter_enabled:
        return ACCEPTED_UNFILTERED

    metrics = analyze_quality(html_body, options, post)

    if metrics.is_low_value:
        check = classify(post)
        if check.is_system_page:
            reason = f"system-generated {check.page_type} page"
        else:
            reason = (
                f"low-value content (words: {metrics.word_count}, "
                f"ratio: {metrics.text_to_markup_ratio:.2f})"
            )
        return FilterDecision(accept=False, metrics=metrics, skip_reason=reason)

    if options.exclude_draft_posts and post.status == "draft":
        return FilterDecision(accept=False, metrics=metrics, skip_reason="draft post")

    return FilterDecision(accept=True, metrics=metrics)
