from locust import HttpUser, task, between
import os

# Wallet and object to hammer; defaults match the bundled fixture data
WALLET = os.getenv("LOCUST_WALLET", "0x00000000000000000000000000000000000000000000000000000000c0ffee01")
OBJECT_ID = os.getenv("LOCUST_OBJECT_ID", "0x6a1e5c0000000000000000000000000000000000000000000000000000000001")


class SuiSplitUser(HttpUser):
    wait_time = between(1, 2)

    @task(3)
    def dashboard(self):
        self.client.get(f"/api/dashboard/{WALLET}", name="/api/dashboard/[address]")

    @task(2)
    def object_lookup(self):
        self.client.get(f"/api/object/{OBJECT_ID}", name="/api/object/[id]")

    @task
    def ping(self):
        self.client.get("/api/test")
