# logic/builder.py

"""
RestorationTransactionBuilder: builds, prepares and signs "restore footprint"
transactions.

Two fee sources share one construction path:
  • nominal: a fixed fee and a read-write footprint naming exactly the keys
    to restore, for the common case of a contract's own instance entry;
  • simulated: the minimum resource fee and the pre-built Soroban data of a
    simulation's restore preamble, used verbatim, for footprints that are
    only known after simulating the intended operation.

Either way the transaction then goes through the network-side prepare step,
which fills in resource estimates, and is signed last.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence

from stellar_sdk import Account as SdkAccount
from stellar_sdk import SorobanDataBuilder, TransactionBuilder

from ledger.footprint import read_write_data
from ledger.gateway import LedgerGateway
from ledger.signer import Signer
from model.account import Account
from model.ledger import FootprintKey, RestorePreamble
from model.restoration import FeeMode, RestorationTransaction
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_FEE = 100
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(slots=True)
class RestorationTransactionBuilder:
    gateway: LedgerGateway
    signer: Signer
    network_passphrase: str
    base_fee: int = DEFAULT_BASE_FEE
    timeout: int = DEFAULT_TIMEOUT_SECONDS

    def build(self, account: Account, footprint: Sequence[FootprintKey],
              preamble: Optional[RestorePreamble] = None) -> RestorationTransaction:
        """Build a signed restoration transaction for `footprint`.

        When `preamble` is given its fee and Soroban data are used unchanged
        and may cover more keys than `footprint`.

        Raises:
            PrepareFailed: If the network cannot estimate resources
        """
        if preamble is not None:
            fee = preamble.min_resource_fee
            soroban_data = SorobanDataBuilder.from_xdr(preamble.transaction_data).build()
            fee_mode = FeeMode.SIMULATED
            footprint = preamble.read_write or tuple(footprint)
        else:
            if not footprint:
                raise ValueError("Nominal restoration needs at least one footprint key")
            fee = self.base_fee
            soroban_data = read_write_data(footprint)
            fee_mode = FeeMode.NOMINAL

        # Fresh SDK account per build: TransactionBuilder bumps its sequence in place.
        source = SdkAccount(account.public_key, account.sequence)
        tx = (
            TransactionBuilder(
                source_account=source,
                network_passphrase=self.network_passphrase,
                base_fee=fee,
            )
            .set_soroban_data(soroban_data)
            .append_restore_footprint_op()
            .set_timeout(self.timeout)
            .build()
        )

        prepared = self.gateway.prepare(tx)
        self.signer.sign(prepared)

        logger.transaction_built(fee, str(fee_mode), len(footprint))
        return RestorationTransaction(
            envelope=prepared,
            fee=fee,
            footprint=tuple(footprint),
            fee_mode=fee_mode,
            sequence=account.next_sequence(),
        )
