from sysbundle.cli.app import main

main()
