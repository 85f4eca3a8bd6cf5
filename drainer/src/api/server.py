#!/usr/bin/env python3
"""
FastAPI server module for drainer status endpoints
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from core.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


class APIServer:
    """FastAPI server exposing health and status of the dispatch loop"""

    def __init__(self, dispatcher: Dispatcher, config: Dict[str, Any]):
        """
        Initialize API server

        Args:
            dispatcher: Dispatcher whose stats are reported
            config: Sanitized configuration dictionary
        """
        self.dispatcher = dispatcher
        self.config = config
        self.app = FastAPI(
            title="Rancher ASG Drainer API",
            description="Status of the Auto Scaling lifecycle hook consumer",
            version="1.0.0"
        )
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/")
        async def root():
            """Root endpoint"""
            return {
                "service": "Rancher ASG Drainer",
                "version": "1.0.0",
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        @self.app.get("/health")
        async def health_check():
            """Healthy while the dispatch loop is running"""
            stats = self.dispatcher.stats
            healthy = stats.running and not stats.fatal_error
            return JSONResponse(
                content={
                    "status": "healthy" if healthy else "unhealthy",
                    "running": stats.running,
                    "fatal_error": stats.fatal_error,
                    "timestamp": datetime.now(timezone.utc).isoformat()
                },
                status_code=200 if healthy else 503
            )

        @self.app.get("/status")
        async def get_status():
            """Get dispatch loop counters and the last message result"""
            try:
                return self.dispatcher.stats.to_dict()
            except Exception as e:
                logger.error(f"Error getting status: {e}")
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/config")
        async def get_config():
            """Get current drainer configuration (sanitized)"""
            return self.config

    def run(self, host: str = "0.0.0.0", port: int = 8080):
        """Run the API server"""
        logger.info(f"Starting API server on {host}:{port}")
        uvicorn.run(self.app, host=host, port=port, log_level="warning")
