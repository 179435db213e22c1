import os

from bdkrpc import Client, UserPass

client = Client.with_auth(
    os.getenv("BITCOIN_RPC_URL", "http://localhost:18443"),
    UserPass(
        os.getenv("BITCOIN_RPC_USER", "bitcoin"),
        os.getenv("BITCOIN_RPC_PASS", "bitcoin"),
    ),
)

print(client.get_best_block_hash())
print(f"Height: {client.get_block_count()}")
