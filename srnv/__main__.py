from srnv.cli.app import main

main()
