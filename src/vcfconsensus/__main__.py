from vcfconsensus.cli import run

run()
