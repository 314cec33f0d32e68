from trellomcp.server import main

main()
