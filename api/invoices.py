"""Invoice HTTP routes.

POST   /invoice                    create
PUT    /invoice/{id}               partial update
PUT    /invoice/{id}/markAsPaid    set status to paid
DELETE /invoice/{id}               delete
GET    /invoices[/{id}]            one invoice, or all (optionally ?status=)
"""

from fastapi import APIRouter, Query, Request

from api.base import success_response
from core.models import InvoiceFields


def create_invoice_router(services: dict) -> APIRouter:
    router = APIRouter()

    invoice_svc = services["invoice"]

    def respond(request: Request, data, message: str | None = None) -> dict:
        return success_response(
            data, message=message, request_id=request.state.request_id
        ).to_json()

    @router.post("/invoice", status_code=201)
    async def create_invoice(request: Request, body: InvoiceFields):
        invoice = invoice_svc.create(body)
        return respond(request, invoice.to_document(), "Invoice created successfully")

    @router.put("/invoice/{invoice_id}")
    async def update_invoice(request: Request, invoice_id: str, body: InvoiceFields):
        invoice = invoice_svc.update(invoice_id, body)
        return respond(request, invoice.to_document(), "Invoice updated successfully")

    @router.put("/invoice/{invoice_id}/markAsPaid")
    async def mark_as_paid(request: Request, invoice_id: str):
        invoice = invoice_svc.mark_as_paid(invoice_id)
        return respond(request, invoice.to_document(), "Invoice marked as paid successfully")

    @router.delete("/invoice/{invoice_id}")
    async def delete_invoice(request: Request, invoice_id: str):
        invoice_svc.delete(invoice_id)
        return respond(request, None, "Invoice deleted successfully")

    @router.get("/invoices")
    async def list_invoices(
        request: Request,
        status: str | None = Query(None),
    ):
        invoices = invoice_svc.list_all(status)
        return respond(request, [i.to_document() for i in invoices])

    @router.get("/invoices/{invoice_id}")
    async def get_invoice(request: Request, invoice_id: str):
        invoice = invoice_svc.get(invoice_id)
        return respond(request, invoice.to_document())

    return router
