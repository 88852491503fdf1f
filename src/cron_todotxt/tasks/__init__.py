"""
Task subsystem.

Components:
- task_models.py: data structures (TodoTask, ScheduledTask, intervals, thresholds)
- task_store.py: the scheduled sidecar file and the live todo.txt file
- task_scheduler.py: the pass that activates and reschedules due tasks
- task_api.py: pull future-dated tasks out of todo.txt, schedule a task by line number
"""
