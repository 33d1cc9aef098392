from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REEFBRIDGE_", env_file=".env", extra="ignore")

    native_ws_url: str = "ws://127.0.0.1:9944"
    evm_rpc_url: str = "http://127.0.0.1:8545"
    token_view_address: str = "0x0000000000000000000000000000000001000000"  # REEF ERC20 precompile, "" disables
    signer_uri: str = "//Alice"
    ss58_format: int = 42
    demo_amount: str = "10"

    transfer_pallet: str = "Revive"
    transfer_call: str = "transfer"
    claim_pallet: str = "EvmAccounts"
    claim_call: str = "claim_default_account"
    claim_storage: str = "EvmAddresses"
    map_pallet: str = "Revive"
    map_call: str = "map_account"
    reverse_storage: str = "OriginalAccount"

    finality_timeout: float | None = None  # seconds, None = wait forever
    rpc_timeout: float = 30.0
    rpc_max_attempts: int = 1  # 1 = no retry
    log_level: str = "INFO"


settings = Settings()
