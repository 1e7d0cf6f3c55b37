# contracts/deploy_contract.py
# Deploy the Odd/Even Game to LocalNet with parameters from ODD_EVEN_CONFIG or the environment.
from odd_even_client import OddEvenClient, get_algod, get_kmd, localnet_accounts
from odd_even_config import resolve_game_config

APP_FUNDING = 1_000_000  # 1 Algo of box minimum balance headroom

def main():
    config = resolve_game_config()
    algod = get_algod()
    owner = localnet_accounts(get_kmd(), count=1)[0]

    client = OddEvenClient.deploy(algod, owner, config)
    client.fund_app(owner, APP_FUNDING)

    print(f"OddEvenGame deployed: app id {client.app_id} at {client.app_address}")
    print(f"  judge {owner.address}, cost {config.game_cost}, "
          f"wait {config.max_waiting_time}s, judge reward {config.judge_reward_percentage}%")

if __name__ == "__main__":
    main()
