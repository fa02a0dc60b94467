import os
import time


def describe_sources(sources):
    if not sources:
        return "No parquet files selected"
    if len(sources) == 1:
        return f"Selected: {os.path.basename(sources[0])}"
    return f"Selected: {len(sources)} files"


def describe_sort(view):
    spec = view.sort_spec
    if spec is None or spec.column_index >= len(view.columns):
        return ""
    direction = "desc" if spec.descending else "asc"
    return f"Sort: {view.columns[spec.column_index]} {direction}"


def describe_filter(view):
    spec = view.filter_spec
    if spec is None or spec.column_index >= len(view.columns):
        return ""
    text = f"Filter: {view.columns[spec.column_index]} {spec.kind} '{spec.pattern}'"
    if not view.filter_applied:
        text += " (not applied)"
    return text


def render_status(context, width):
    """
    context keys: view, status_msg, status_until, page_index, page_total,
                  page_start, page_end
    """
    view = context["view"]
    now = time.time()
    if view.error:
        text = f" {view.error}"
    elif context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        parts = [describe_sources(view.sources)]
        if view.is_loaded:
            rows, cols = view.shape
            parts.append(f"{rows} rows x {cols} cols")
            sort_text = describe_sort(view)
            if sort_text:
                parts.append(sort_text)
            filter_text = describe_filter(view)
            if filter_text:
                parts.append(filter_text)
            page_total = context.get("page_total", 1)
            page_index = context.get("page_index", 0)
            page_start = context.get("page_start", 0)
            page_end = context.get("page_end", page_start)
            parts.append(
                f"Page {page_index + 1}/{page_total} rows "
                f"{page_start}-{max(page_start, page_end - 1)}"
            )
        parts.append("? help")
        text = " " + " | ".join(parts)

    return text.ljust(width)[:width]
