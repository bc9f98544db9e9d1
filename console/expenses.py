import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_http_methods, require_POST

from templeapi import TempleApiError, client_for, media_url

from .decorators import console_login_required
from .forms import ExpenseForm, remaining_balance
from .views import as_list, backend_error

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


def _page_number(value):
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def expense_page(data, page=0):
    """Normalize the paginated ``{"expenses": [...]}`` body or a plain list."""
    if isinstance(data, dict) and "expenses" in data:
        rows = as_list(data, "expenses")
        return {
            "expenses": rows,
            "current_page": data.get("currentPage", page) or 0,
            "total_pages": data.get("totalPages") or (1 if rows else 0),
            "total": data.get("totalElements", len(rows)),
        }
    rows = as_list(data)
    return {"expenses": rows, "current_page": 0, "total_pages": 1, "total": len(rows)}


def _load(request, page, query):
    client = client_for(request)
    try:
        listing = expense_page(client.expenses(page=page, size=PAGE_SIZE, description=query), page)
        stats = client.expense_stats() or {}
    except TempleApiError as e:
        logger.warning("Expenses unavailable: %s", e)
        messages.error(request, "Could not load expenses.")
        return expense_page([]), {}
    return listing, stats


def _find_expense(request, expense_id, page, query):
    client = client_for(request)
    candidates = (
        {"page": page, "size": PAGE_SIZE, "description": query},
        {"page": 0, "size": 1000, "description": ""},
    )
    for params in candidates:
        try:
            rows = expense_page(client.expenses(**params))["expenses"]
        except TempleApiError as e:
            logger.warning("Looking up expense %s failed: %s", expense_id, e)
            break
        for row in rows:
            if str(row.get("id")) == str(expense_id):
                return row
    raise Http404("Expense not found")


def _save(request, form, expense_id=None):
    """Upload the document if one was attached, then create or edit the expense."""
    client = client_for(request)
    try:
        document_url = None
        if form.cleaned_data.get("document"):
            uploaded = client.upload_document(form.cleaned_data["document"])
            if isinstance(uploaded, dict) and uploaded.get("url"):
                document_url = media_url(uploaded["url"])
        if expense_id is None:
            client.create_expense(form.payload(document_url))
        else:
            client.edit_expense(expense_id, form.payload(document_url))
    except TempleApiError as e:
        logger.warning("Saving expense %s failed: %s", expense_id or "(new)", e)
        text = backend_error(e, e.message or "Unknown error")
        lowered = text.lower()
        if "exceeds" in lowered or "balance" in lowered:
            form.add_error("amount", text)
        else:
            form.add_error(None, f"Error saving expense: {text}")
        return False
    return True


def _list_url(page, query):
    params = {k: v for k, v in (("page", page), ("q", query)) if v}
    return reverse("console:expenses") + (f"?{urlencode(params)}" if params else "")


@console_login_required
@require_http_methods(["GET", "POST"])
def expenses(request):
    source = request.POST if request.method == "POST" else request.GET
    page = _page_number(source.get("page"))
    query = (source.get("q") or "").strip()
    listing, stats = _load(request, page, query)

    form = ExpenseForm(request.POST or None, request.FILES or None, max_amount=remaining_balance(stats))
    if request.method == "POST" and form.is_valid() and _save(request, form):
        messages.success(request, "Expense saved.")
        return redirect(_list_url(page, query))

    ctx = {
        **listing,
        "stats": {
            "totalDonations": stats.get("totalDonations") or 0,
            "totalExpenses": stats.get("totalExpenses") or 0,
            "remaining": stats.get("remaining") or 0,
        },
        "form": form,
        "show_form": request.method == "POST",
        "query": query,
        "has_prev": listing["current_page"] > 0,
        "has_next": listing["current_page"] + 1 < listing["total_pages"],
        "prev_url": _list_url(listing["current_page"] - 1, query),
        "next_url": _list_url(listing["current_page"] + 1, query),
    }
    return render(request, "console/expenses.html", ctx)


@console_login_required
@require_http_methods(["GET", "POST"])
def expense_edit(request, expense_id):
    source = request.POST if request.method == "POST" else request.GET
    page = _page_number(source.get("page"))
    query = (source.get("q") or "").strip()
    expense = _find_expense(request, expense_id, page, query)
    try:
        stats = client_for(request).expense_stats() or {}
    except TempleApiError as e:
        logger.warning("Expense stats unavailable: %s", e)
        stats = {}
    max_amount = remaining_balance(stats, expense.get("amount"))

    if request.method == "POST":
        form = ExpenseForm(request.POST, request.FILES, max_amount=max_amount)
        if form.is_valid() and _save(request, form, expense_id):
            messages.success(request, "Expense updated.")
            return redirect(_list_url(page, query))
    else:
        form = ExpenseForm(max_amount=max_amount, initial={
            "description": expense.get("description") or "",
            "amount": expense.get("amount"),
            "category": expense.get("category") or "",
            "notes": expense.get("notes") or "",
            "purchase_date": str(expense.get("purchaseDate") or "").split("T")[0],
            "supporting_document": expense.get("supportingDocument") or "",
        })
    ctx = {"form": form, "expense": expense, "page": page, "query": query, "max_amount": max_amount}
    return render(request, "console/expense_form.html", ctx)


@console_login_required
@require_POST
def expense_delete(request, expense_id):
    try:
        client_for(request).delete_expense(expense_id)
    except TempleApiError as e:
        logger.warning("Deleting expense %s failed: %s", expense_id, e)
        messages.error(request, "Error deleting expense")
    else:
        messages.success(request, "Expense deleted.")
    return redirect(_list_url(_page_number(request.POST.get("page")), (request.POST.get("q") or "").strip()))
