from sensor_ingest.main import run

run()
