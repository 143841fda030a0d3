from photonctl.cli import run

run()
