"""
Factory for the throwaway transactions the benchmark simulates

Every transaction serializes fine but has no signer, so the remote
evaluator has to reject it during sanitization.
"""
import base64

from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import SanitizeError, Transaction


def build_invalid_transaction():
    """Build an unsigned one-instruction transaction with no fee payer"""
    instruction = Instruction(Pubkey.new_unique(), b"", [])
    return Transaction.new_unsigned(Message([instruction], None))


def encode_transaction(tx):
    """Wire encoding used by simulateTransaction (bincode, then base64)"""
    return base64.b64encode(bytes(tx)).decode('ascii')


def is_sanitary(tx):
    """Local equivalent of the validity check the RPC node runs first"""
    try:
        tx.sanitize()
    except SanitizeError:
        return False
    return True
