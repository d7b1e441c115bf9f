from working_paper_agent.cli import run

run()
