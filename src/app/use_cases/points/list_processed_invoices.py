"""
List Processed Invoices Use Case

Retrieves the invoices an account has been awarded points for.
"""
from libs.result import Result, Return
from src.app.repositories.processed_invoice_repository import ProcessedInvoiceRepository
from .dtos import ListProcessedInvoicesResponseDTO, ProcessedInvoiceDTO


class ListProcessedInvoices:

    def __init__(self, processed_invoice_repo: ProcessedInvoiceRepository):
        self.processed_invoice_repo = processed_invoice_repo

    async def execute(
        self, account_id: int, limit: int = 50, offset: int = 0
    ) -> Result[ListProcessedInvoicesResponseDTO]:
        invoices, total = await self.processed_invoice_repo.get_by_account_id(
            account_id=account_id, limit=limit, offset=offset
        )

        return Return.ok(
            ListProcessedInvoicesResponseDTO(
                invoices=[
                    ProcessedInvoiceDTO(
                        id=inv.id,
                        external_invoice_id=inv.external_invoice_id,
                        invoice_number=inv.invoice_number,
                        invoice_date=inv.invoice_date,
                        invoice_total=inv.invoice_total,
                        billing_type=inv.billing_type.value,
                        regular_points=inv.regular_points,
                        annual_points=inv.annual_points,
                        referral_points=inv.referral_points,
                        processed_at=inv.processed_at,
                    )
                    for inv in invoices
                ],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
