import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, file_path, row_count, total_rows,
                  filter_count, sort_label, hidden_count, page_label
    """
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        return f" {context['status_msg']}".ljust(width)[:width]

    parts = []
    fname = context.get("file_path") or ""
    if fname:
        parts.append(os.path.basename(fname))

    row_count = context.get("row_count", 0)
    total_rows = context.get("total_rows", row_count)
    rows_text = f"{row_count} rows"
    if total_rows != row_count:
        rows_text = f"{row_count}/{total_rows} rows"
    parts.append(rows_text)

    filter_count = context.get("filter_count", 0)
    if filter_count:
        parts.append(f"filters: {filter_count}")

    sort_label = context.get("sort_label")
    if sort_label:
        parts.append(f"sort: {sort_label}")

    hidden_count = context.get("hidden_count", 0)
    if hidden_count:
        parts.append(f"hidden: {hidden_count}")

    page_label = context.get("page_label")
    if page_label:
        parts.append(page_label)

    text = " " + " | ".join(parts)
    return text.ljust(width)[:width]
