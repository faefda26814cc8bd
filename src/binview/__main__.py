from binview.cli import main

main()
