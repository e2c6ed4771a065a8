"""
GasFree transfer example: look up the account, sign a PermitTransfer,
submit it and poll until the relay reports a final state.

Requires the examples extra (eth-account) and a .env file with:
    GASFREE_API_KEY, GASFREE_API_SECRET, GASFREE_NETWORK=nile,
    TRON_PRIVATE_KEY, TRON_ADDRESS, RECEIVER_ADDRESS
"""

import asyncio
import logging
import os
import sys
import time
from pathlib import Path

from dotenv import load_dotenv
from eth_account import Account
from eth_account.messages import encode_typed_data

from gasfree import AsyncGasFreeClient, ClientConfig, GasFreeError, PermitTransfer
from gasfree.eip712 import GASFREE_DOMAIN_TYPE, PERMIT_TRANSFER_PRIMARY_TYPE
from gasfree.logging_config import setup_logging
from gasfree.utils.address import tron_address_to_evm

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

TRON_PRIVATE_KEY = os.getenv("TRON_PRIVATE_KEY", "")
TRON_ADDRESS = os.getenv("TRON_ADDRESS", "")
RECEIVER_ADDRESS = os.getenv("RECEIVER_ADDRESS", "")
TOKEN_SYMBOL = "USDT"
AMOUNT = 1_000_000  # 1 USDT
DEADLINE_SECONDS = 180
POLL_INTERVAL = 5
POLL_TIMEOUT = 120

logger = logging.getLogger("gasfree.example")


def sign_permit(client: AsyncGasFreeClient, permit: PermitTransfer) -> str:
    """Sign a PermitTransfer with TIP-712, addresses encoded as 20-byte hex"""
    message = permit.to_message()
    for field in ("token", "serviceProvider", "user", "receiver"):
        message[field] = tron_address_to_evm(message[field])

    full_data = {
        "types": {"EIP712Domain": GASFREE_DOMAIN_TYPE, **client.get_message_types()},
        "domain": client.get_message_domain(evm_format=True),
        "primaryType": PERMIT_TRANSFER_PRIMARY_TYPE,
        "message": message,
    }
    encoded = encode_typed_data(full_message=full_data)
    private_key = TRON_PRIVATE_KEY if TRON_PRIVATE_KEY.startswith("0x") else "0x" + TRON_PRIVATE_KEY
    signed = Account.sign_message(encoded, private_key=private_key)
    return signed.signature.hex()


async def wait_for_final_state(client: AsyncGasFreeClient, trace_id: str) -> dict:
    """Poll the transfer until it succeeds, fails or times out"""
    start_time = time.time()
    while time.time() - start_time < POLL_TIMEOUT:
        details = await client.get_transfer_details(trace_id)
        state = (details.get("state") or "").upper()
        logger.info(f"Transfer {trace_id}: state={state} txnHash={details.get('txnHash')}")
        if state in ("SUCCEED", "FAILED"):
            return details
        await asyncio.sleep(POLL_INTERVAL)
    raise TimeoutError(f"Transfer {trace_id} timed out after {POLL_TIMEOUT}s")


async def main() -> int:
    config = ClientConfig.from_env()
    async with AsyncGasFreeClient.from_config(config) as client:
        tokens = (await client.get_all_tokens()).get("tokens", [])
        token = next(t for t in tokens if t.get("symbol") == TOKEN_SYMBOL)
        provider = (await client.get_all_providers()).get("providers", [])[0]
        account = await client.get_account_info(TRON_ADDRESS)

        logger.info(f"GasFree address: {account.get('gasFreeAddress')}")
        if not account.get("active", False):
            logger.warning("GasFree account is not activated; the first transfer pays the fee")

        permit = PermitTransfer(
            token=token["tokenAddress"],
            serviceProvider=provider["address"],
            user=TRON_ADDRESS,
            receiver=RECEIVER_ADDRESS,
            value=AMOUNT,
            maxFee=int(token.get("transferFee", 0)) + int(token.get("activateFee", 0)),
            deadline=int(time.time()) + DEADLINE_SECONDS,
            version=1,
            nonce=int(account.get("nonce", 0)),
        )
        signature = sign_permit(client, permit)
        result = await client.submit_transfer(permit.with_signature(signature))
        trace_id = result["id"]
        logger.info(f"Submitted transfer, traceId={trace_id}")

        details = await wait_for_final_state(client, trace_id)
        logger.info(f"Final state: {details.get('state')} txnHash={details.get('txnHash')}")
        return 0 if details.get("state") == "SUCCEED" else 1


if __name__ == "__main__":
    setup_logging(logging.INFO)
    if not (TRON_PRIVATE_KEY and TRON_ADDRESS and RECEIVER_ADDRESS):
        logger.error("TRON_PRIVATE_KEY, TRON_ADDRESS and RECEIVER_ADDRESS must be set in .env")
        sys.exit(1)
    try:
        sys.exit(asyncio.run(main()))
    except GasFreeError as e:
        logger.error(f"GasFree error ({e.kind.value}): {e}")
        sys.exit(1)
