from simmetrics.main import run

run()
