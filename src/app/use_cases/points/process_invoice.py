"""ProcessInvoice Use Case

Converts one finalized invoice into point awards exactly once.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.points_ledger import PointsLedger
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.processed_invoice_repository import ProcessedInvoiceRepository
from src.app.repositories.product_point_rate_repository import ProductPointRateRepository
from src.app.repositories.referral_repository import ReferralRepository
from src.domain.base import round_points
from src.domain.errors import AccountNotFoundError
from src.domain.point_pool import PointPool
from src.domain.point_transaction import TransactionSource
from src.domain.processed_invoice import BillingType, ProcessedInvoice
from src.domain.referral_tier import tier_percent
from .dtos import InvoiceDTO, ProcessInvoiceCommandDTO, ProcessInvoiceResponseDTO

logger = logging.getLogger(__name__)

INVOICE_REFERENCE_TYPE = "invoice"


class ProcessInvoice:
    """
    Use Case: Award points for a finalized invoice

    Business Rules:
    1. Idempotent on the external invoice id (checked first; a unique
       constraint race on the idempotency record is also "already processed")
    2. Line items without an active rate are skipped
    3. Customer billing earns regular_points_per_unit x quantity (regular pool)
    4. Annual-eligible items earn line_revenue x annual_pct / 100 (annual pool)
    5. Referral bonus on the full invoice total goes to the referrer's regular pool
    6. Credits, referral update and idempotency record commit together or not at all
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: PointsLedger,
        account_repo: AccountRepository,
        rate_repo: ProductPointRateRepository,
        referral_repo: ReferralRepository,
        processed_invoice_repo: ProcessedInvoiceRepository,
    ):
        self.uow = uow
        self.ledger = ledger
        self.account_repo = account_repo
        self.rate_repo = rate_repo
        self.referral_repo = referral_repo
        self.processed_invoice_repo = processed_invoice_repo

    async def execute(self, command: ProcessInvoiceCommandDTO) -> Result[ProcessInvoiceResponseDTO]:
        """
        Execute invoice processing

        Args:
            command: Account, invoice payload, billing type and acting user

        Returns:
            Result[ProcessInvoiceResponseDTO]: Points awarded, or already_processed

        Errors:
            ACCOUNT_NOT_FOUND: No such account
            PROCESS_INVOICE_FAILED: Unexpected failure (nothing was written)
        """
        invoice = command.invoice

        try:
            existing = await self.processed_invoice_repo.get_by_external_id(invoice.external_id)
            if existing:
                logger.info(f"Invoice {invoice.external_id} already processed, skipping")
                return Return.ok(self._already_processed(invoice.external_id))

            account = await self.account_repo.get_by_id(command.account_id)
            if not account:
                raise AccountNotFoundError(command.account_id)

            regular_points, annual_points = await self._calculate_points(
                invoice, command.billing_type
            )

            source = (
                TransactionSource.CUSTOMER_BILLING
                if command.billing_type == BillingType.CUSTOMER
                else TransactionSource.SELF_BILLING
            )
            description = f"Invoice {invoice.number or invoice.external_id}"

            await self.ledger.credit(
                command.account_id, PointPool.REGULAR, regular_points, source,
                reference_id=invoice.external_id,
                reference_type=INVOICE_REFERENCE_TYPE,
                description=description,
                actor_id=command.actor_id,
            )
            await self.ledger.credit(
                command.account_id, PointPool.ANNUAL, annual_points, source,
                reference_id=invoice.external_id,
                reference_type=INVOICE_REFERENCE_TYPE,
                description=description,
                actor_id=command.actor_id,
            )

            referral_points, referrer_id = await self._apply_referral_bonus(command)

            await self.processed_invoice_repo.create(
                ProcessedInvoice(
                    account_id=command.account_id,
                    external_invoice_id=invoice.external_id,
                    invoice_number=invoice.number,
                    invoice_date=invoice.invoice_date,
                    invoice_total=round_points(invoice.total),
                    billing_type=command.billing_type,
                    regular_points=regular_points,
                    annual_points=annual_points,
                    referral_points=referral_points,
                )
            )

            await self.uow.commit()

        except IntegrityError as e:
            await self.uow.rollback()
            # Lost the race on external_invoice_id to a concurrent processor
            if await self.processed_invoice_repo.get_by_external_id(invoice.external_id):
                logger.info(f"Invoice {invoice.external_id} processed concurrently, skipping")
                return Return.ok(self._already_processed(invoice.external_id))
            return Return.err(
                Error(
                    code="PROCESS_INVOICE_FAILED",
                    message="Failed to process invoice",
                    reason=str(e),
                )
            )
        except AccountNotFoundError as e:
            await self.uow.rollback()
            return Return.err(Error(code="ACCOUNT_NOT_FOUND", message=str(e)))
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to process invoice {invoice.external_id}: {e}", exc_info=True)
            return Return.err(
                Error(
                    code="PROCESS_INVOICE_FAILED",
                    message="Failed to process invoice",
                    reason=str(e),
                )
            )

        logger.info(
            f"Processed invoice {invoice.external_id} for account {command.account_id}: "
            f"regular={regular_points}, annual={annual_points}, referral={referral_points}"
        )

        return Return.ok(
            ProcessInvoiceResponseDTO(
                external_invoice_id=invoice.external_id,
                regular_points=regular_points,
                annual_points=annual_points,
                referral_points=referral_points,
                referrer_account_id=referrer_id,
            )
        )

    async def _calculate_points(
        self, invoice: InvoiceDTO, billing_type: BillingType
    ) -> Tuple[Decimal, Decimal]:
        rates = await self.rate_repo.get_active_by_item_ids(
            {item.item_id for item in invoice.line_items}
        )

        regular = Decimal("0")
        annual = Decimal("0")

        for item in invoice.line_items:
            rate = rates.get(item.item_id)
            if not rate:
                continue

            if billing_type == BillingType.CUSTOMER:
                regular += rate.regular_points_per_unit * item.quantity

            if rate.annual_eligible and item.line_revenue > 0:
                annual += item.line_revenue * rate.annual_pct / 100

        return round_points(regular), round_points(annual)

    async def _apply_referral_bonus(
        self, command: ProcessInvoiceCommandDTO
    ) -> Tuple[Decimal, Optional[int]]:
        referral = await self.referral_repo.get_active_by_referred_id(
            command.account_id, for_update=True
        )
        if not referral:
            return Decimal("0.00"), None

        total_bills = referral.total_bills + 1
        tier_pct = tier_percent(total_bills)
        bonus = round_points(command.invoice.total * tier_pct / 100)

        if bonus > 0:
            await self.ledger.credit(
                referral.referrer_id, PointPool.REGULAR, bonus, TransactionSource.REFERRAL,
                reference_id=command.invoice.external_id,
                reference_type=INVOICE_REFERENCE_TYPE,
                description=f"Referral bonus ({tier_pct}%) for account {command.account_id}",
                actor_id=command.actor_id,
            )

        referral.total_bills = total_bills
        referral.current_tier_pct = tier_pct
        referral.total_referral_points = round_points(referral.total_referral_points + bonus)
        await self.referral_repo.update(referral)

        return bonus, referral.referrer_id

    @staticmethod
    def _already_processed(external_invoice_id: str) -> ProcessInvoiceResponseDTO:
        return ProcessInvoiceResponseDTO(
            external_invoice_id=external_invoice_id,
            already_processed=True,
        )
