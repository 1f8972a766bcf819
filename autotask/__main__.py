from autotask.cli import main

main()
